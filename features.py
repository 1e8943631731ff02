from dataclasses import dataclass
from math import isfinite, sqrt
from typing import Iterable, Iterator


class EmptyInputError(Exception):
    pass


class MalformedRecordError(Exception):
    def __init__(self, line_number, line, reason):
        super().__init__(f"line {line_number}: {reason}: {line!r}")
        self.line_number = line_number
        self.line = line
        self.reason = reason


@dataclass(frozen=True)
class Feature:
    label: str
    x: float
    y: float

    @property
    def point(self) -> tuple[float, float]:
        return (self.x, self.y)

    def distance_to(self, other: "Feature") -> float:
        dx = self.x - other.x
        dy = self.y - other.y
        return sqrt(dx * dx + dy * dy)


class FeatureStore:
    """
    The features read from the input, in input order. Read-only once built.
    """

    def __init__(self, features: Iterable[Feature]):
        self._features = tuple(features)
        if not self._features:
            raise EmptyInputError("no features were supplied")

    def __len__(self):
        return len(self._features)

    def __iter__(self) -> Iterator[Feature]:
        return iter(self._features)

    def __getitem__(self, i):
        return self._features[i]

    def get(self, i) -> Feature:
        return self._features[i]

    def __repr__(self):
        return f"FeatureStore({len(self._features)} features)"


def parse_line(line: str, line_number: int) -> Feature:
    fields = line.split()
    if len(fields) != 3:
        raise MalformedRecordError(line_number, line,
                                   f"expected 3 fields, found {len(fields)}")
    label = fields[0]
    try:
        x, y = float(fields[1]), float(fields[2])
    except ValueError:
        raise MalformedRecordError(line_number, line,
                                   "coordinates must be numeric") from None
    if not (isfinite(x) and isfinite(y)):
        raise MalformedRecordError(line_number, line,
                                   "coordinates must be finite")
    return Feature(label, x, y)


def read_features(lines: Iterable[str]) -> FeatureStore:
    features = []
    for number, line in enumerate(lines, start=1):
        if not line.strip():
            continue
        features.append(parse_line(line, number))
    return FeatureStore(features)


def from_file(path) -> FeatureStore:
    with open(path, 'r', encoding='utf-8') as fp:
        return read_features(fp)
