"""Pytest configuration for spheretrace tests.

This module provides shared fixtures for all test modules, including
Taichi initialization which must happen once per session.
"""

import pytest
import taichi as ti


@pytest.fixture(scope="session", autouse=True)
def init_taichi_session():
    """Initialize Taichi once for the entire test session.

    Fields are created when spheretrace modules are first imported, so tests
    import them lazily, after this fixture has run.
    """
    ti.init(arch=ti.cpu, default_fp=ti.f64, random_seed=42)
    yield


@pytest.fixture(autouse=True)
def clear_all_scene_data():
    """Clear the world, the material registries and the render target.

    This ensures tests are isolated from each other.
    """
    from spheretrace.core import integrator
    from spheretrace.scene.manager import clear_all

    def _clear_all():
        clear_all()
        integrator.clear_render_target()
        integrator._render_target_initialized[None] = 0

    _clear_all()

    yield

    _clear_all()
