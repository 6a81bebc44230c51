"""
Validation functions for attrs records.
"""
from attrs import define

__all__ = ["range_", "rgba"]


@define(repr=False, frozen=True)
class _RangeValidator:
    minimum: float
    maximum: float

    def __call__(self, inst, attr, value):
        try:
            valid = self.minimum <= value <= self.maximum
        except TypeError:
            valid = False

        if not valid:
            raise ValueError(
                "'%s' must be in range [%r, %r], got %r"
                % (attr.name, self.minimum, self.maximum, value)
            )

    def __repr__(self):
        return "<range_ validator with [%r, %r]>" % (self.minimum, self.maximum)


def range_(minimum, maximum):
    """
    A validator that raises a :exc:`ValueError` if the value does not belong
    in the closed [minimum, maximum] range.
    """
    return _RangeValidator(minimum, maximum)


def rgba(inst, attr, value):
    """
    A validator that raises a :exc:`ValueError` unless the value is a tuple
    of four integer channels in [0, 255].
    """
    if (
        not isinstance(value, tuple)
        or len(value) != 4
        or not all(isinstance(v, int) and 0 <= v <= 255 for v in value)
    ):
        raise ValueError("'%s' must be an RGBA tuple, got %r" % (attr.name, value))
