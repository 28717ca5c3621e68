import math

EPSILON = 1e-10


class Vector2:
    """
    Immutable 2D vector. Every operation returns a new Vector2.

    Vectors unpack like tuples (`x, y = v`) and convert to and from complex numbers.
    Division by zero is permissive and yields the zero vector.
    """

    __slots__ = ("_x", "_y")

    def __init__(self, x=0.0, y=0.0):
        object.__setattr__(self, "_x", float(x))
        object.__setattr__(self, "_y", float(y))

    def __setattr__(self, key, value):
        raise AttributeError("Vector2 is immutable")

    @property
    def x(self) -> float:
        return self._x

    @property
    def y(self) -> float:
        return self._y

    def __repr__(self):
        return f"Vector2({self._x:g}, {self._y:g})"

    def __iter__(self):
        yield self._x
        yield self._y

    def __len__(self):
        return 2

    def __getitem__(self, item):
        return (self._x, self._y)[item]

    def __complex__(self):
        return complex(self._x, self._y)

    def __eq__(self, other):
        if not isinstance(other, Vector2):
            return NotImplemented
        return self._x == other._x and self._y == other._y

    def __hash__(self):
        return hash((self._x, self._y))

    def __add__(self, other):
        return self.add(other)

    def __sub__(self, other):
        return self.subtract(other)

    def __mul__(self, scalar):
        if isinstance(scalar, Vector2):
            return NotImplemented
        return self.multiply(scalar)

    __rmul__ = __mul__

    def __truediv__(self, scalar):
        return self.divide(scalar)

    def __neg__(self):
        return self.negate()

    @classmethod
    def of(cls, value):
        """
        Coerce a Vector2, (x, y) pair, complex or object with x/y attributes.
        """
        if isinstance(value, Vector2):
            return value
        if isinstance(value, complex):
            return cls(value.real, value.imag)
        if hasattr(value, "x") and hasattr(value, "y"):
            return cls(value.x, value.y)
        x, y = value
        return cls(x, y)

    def add(self, other) -> "Vector2":
        other = Vector2.of(other)
        return Vector2(self._x + other.x, self._y + other.y)

    def subtract(self, other) -> "Vector2":
        other = Vector2.of(other)
        return Vector2(self._x - other.x, self._y - other.y)

    def multiply(self, scalar: float) -> "Vector2":
        return Vector2(self._x * scalar, self._y * scalar)

    def divide(self, scalar: float) -> "Vector2":
        if scalar == 0:
            return Vector2.zero()
        return Vector2(self._x / scalar, self._y / scalar)

    def negate(self) -> "Vector2":
        return Vector2(-self._x, -self._y)

    def length(self) -> float:
        return math.hypot(self._x, self._y)

    def length_squared(self) -> float:
        return self._x * self._x + self._y * self._y

    def normalize(self) -> "Vector2":
        length = self.length()
        if length == 0:
            return Vector2.zero()
        return Vector2(self._x / length, self._y / length)

    def dot(self, other) -> float:
        other = Vector2.of(other)
        return self._x * other.x + self._y * other.y

    def cross(self, other) -> float:
        """
        Scalar z-component of the 3D cross product.
        """
        other = Vector2.of(other)
        return self._x * other.y - self._y * other.x

    def angle(self) -> float:
        return math.atan2(self._y, self._x)

    def distance_to(self, other) -> float:
        return self.subtract(other).length()

    def rotate(self, radians: float) -> "Vector2":
        c = math.cos(radians)
        s = math.sin(radians)
        return Vector2(self._x * c - self._y * s, self._x * s + self._y * c)

    def perpendicular(self) -> "Vector2":
        """90 degrees counter-clockwise: (-y, x)."""
        return Vector2(-self._y, self._x)

    def perpendicular_cw(self) -> "Vector2":
        """90 degrees clockwise: (y, -x)."""
        return Vector2(self._y, -self._x)

    def lerp(self, other, t: float) -> "Vector2":
        other = Vector2.of(other)
        return Vector2(
            self._x + (other.x - self._x) * t,
            self._y + (other.y - self._y) * t,
        )

    def equals(self, other, epsilon: float = EPSILON) -> bool:
        other = Vector2.of(other)
        return abs(self._x - other.x) < epsilon and abs(self._y - other.y) < epsilon

    def clone(self) -> "Vector2":
        return Vector2(self._x, self._y)

    @staticmethod
    def zero():
        return Vector2(0, 0)

    @staticmethod
    def one():
        return Vector2(1, 1)

    @staticmethod
    def up():
        return Vector2(0, -1)

    @staticmethod
    def down():
        return Vector2(0, 1)

    @staticmethod
    def left():
        return Vector2(-1, 0)

    @staticmethod
    def right():
        return Vector2(1, 0)

    @staticmethod
    def from_angle(radians: float) -> "Vector2":
        return Vector2(math.cos(radians), math.sin(radians))

    @staticmethod
    def from_complex(value: complex) -> "Vector2":
        return Vector2(value.real, value.imag)
