"""Line, type and method counter for C/C++ and C# source trees."""

__version__ = "0.5.0"
