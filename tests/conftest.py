"""Pytest configuration for minipath tests.

This module provides shared fixtures for all test modules, including
Taichi initialization which must happen once per session.
"""

import pytest
import taichi as ti


@pytest.fixture(scope="session", autouse=True)
def init_taichi_session():
    """Initialize Taichi once for the entire test session.

    Using session scope prevents multiple ti.init() calls which can cause
    segmentation faults due to Taichi runtime conflicts.
    """
    ti.init(arch=ti.cpu, random_seed=42)
    yield


@pytest.fixture(autouse=True)
def clear_render_state():
    """Clear scene storage and the render target around each test.

    This ensures tests are isolated from each other.
    """
    # Import here so Taichi is initialized before fields are declared
    from minipath.core.integrator import reset_render_target
    from minipath.scene.intersection import clear_scene

    def _clear_all():
        clear_scene()
        reset_render_target()

    _clear_all()
    yield
    _clear_all()


@pytest.fixture
def default_scene():
    """The four-sphere scene loaded into scene storage."""
    from minipath.scene.description import create_default_scene
    from minipath.scene.intersection import load_scene

    scene = create_default_scene()
    load_scene(scene)
    return scene
