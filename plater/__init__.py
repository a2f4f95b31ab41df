"""Place 3D-printer parts from STL files onto build plates and export the plates."""

__version__ = "1.1.0"