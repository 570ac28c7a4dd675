"""Small assertion helpers shared by the test modules."""


def to_tuples(intervals):
    return [(interval.start, interval.end) for interval in intervals]
