"""cppgen: C++ project skeleton generator."""

__version__ = "0.1.0"
