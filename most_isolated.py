import sys

import PIL
import PIL.Image
import PIL.ImageDraw

import isolation
import kdtree as kdpy
from features import EmptyInputError, MalformedRecordError, from_file

INPUT = None
OUTPUT = None
IMAGE_SIZE = 1000
MARGIN = 20

if __name__ == "__main__":
    import argparse
    parser = argparse.ArgumentParser(
        description="Find the feature furthest from its nearest neighbour")
    parser.add_argument("filename")
    parser.add_argument("--acceleration", dest="acceleration",
                        choices=isolation.ACCELERATIONS, default="python-kdtree")
    parser.add_argument('--kdtree-search-debug',
                        dest="kdtree_search_debug", action='store_const',
                        const=True, default=False)
    parser.add_argument('--print-progress', dest='print_progress',
                        action='store_const',
                        const=True, default=False)
    parser.add_argument("-o", dest="output")
    parser.add_argument("--image-size", dest="image_size", type=int,
                        default=1000)
    args = parser.parse_args()
    isolation.ACCELERATION = args.acceleration
    isolation.PRINT_PROGRESS = args.print_progress
    kdpy.DEBUG_SEARCH = args.kdtree_search_debug
    INPUT = args.filename
    OUTPUT = args.output
    IMAGE_SIZE = args.image_size


def describe(result: isolation.IsolationResult) -> str:
    f = result.feature
    return (f"most isolated feature - {f.label}\n"
            f"position ({f.x:g}, {f.y:g}), nearest neighbour {result.distance:.4f} away")


def render(store, result, output, size=IMAGE_SIZE):
    """
    Draw every feature as a black dot and the most isolated one in red, circled
    at the distance of its nearest neighbour.
    """
    min_x = min(f.x for f in store)
    max_x = max(f.x for f in store)
    min_y = min(f.y for f in store)
    max_y = max(f.y for f in store)
    span = max(max_x - min_x, max_y - min_y) or 1.0
    scale = (size - 2 * MARGIN) / span

    def to_image(f):
        return (MARGIN + (f.x - min_x) * scale,
                size - MARGIN - (f.y - min_y) * scale)

    image = PIL.Image.new("RGB", (size, size), color=(255, 255, 255))
    draw = PIL.ImageDraw.Draw(image, 'RGB')
    for f in store:
        x, y = to_image(f)
        draw.ellipse([(x-1, y-1), (x+1, y+1)], fill=(0, 0, 0))

    x, y = to_image(result.feature)
    r = result.distance * scale
    draw.ellipse([(x-r, y-r), (x+r, y+r)], outline=(255, 0, 0))
    draw.ellipse([(x-3, y-3), (x+3, y+3)], fill=(255, 0, 0))
    draw.text((x+5, y+5), result.feature.label, fill=(255, 0, 0))
    image.save(output)
    return image


def run(filename, acceleration=None):
    store = from_file(filename)
    if isolation.PRINT_PROGRESS:
        print(f"Features: {len(store)}")
    return store, isolation.most_isolated(store, acceleration)


if __name__ == "__main__":
    try:
        store, result = run(INPUT)
    except FileNotFoundError:
        print(f"error - {INPUT} does not exist", file=sys.stderr)
        sys.exit(1)
    except (MalformedRecordError, EmptyInputError,
            isolation.NoIsolatedPointError) as e:
        print(f"error - {INPUT}: {e}", file=sys.stderr)
        sys.exit(1)
    print()
    print(describe(result))
    print()
    if OUTPUT:
        render(store, result, OUTPUT, IMAGE_SIZE)
