"""Camera module for primary ray generation.

Components:
    pinhole: Axis-aligned pinhole camera with a fixed 2-unit-tall viewport

Ray generation uses normalized screen coordinates:
    u in [0, 1]: left to right across image
    v in [0, 1]: bottom to top across image

Note: pinhole declares Taichi fields, so import it after ti.init().
"""
