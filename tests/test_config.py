"""Tests for render configuration and logging setup."""

import logging

import pytest


class TestRenderConfig:
    def test_defaults(self):
        from src.pathtracer.config import RenderConfig

        config = RenderConfig()
        config.validate()
        assert config.image_width == 800
        assert config.image_height == 450
        assert config.samples_per_pixel == 100
        assert config.max_depth == 50
        assert config.background == (0.0, 0.0, 0.0)

    def test_height_is_truncated(self):
        from src.pathtracer.config import RenderConfig

        assert RenderConfig(image_width=400, aspect_ratio=16.0 / 9.0).image_height == 225
        assert RenderConfig(image_width=100, aspect_ratio=3.0).image_height == 33

    @pytest.mark.parametrize(
        "overrides",
        [
            {"image_width": 0},
            {"image_width": 10, "aspect_ratio": 20.0},
            {"image_width": 4096},
            {"samples_per_pixel": 0},
            {"max_depth": -1},
            {"num_threads": 0},
            {"arch": "tpu"},
        ],
    )
    def test_invalid_values(self, overrides):
        from src.pathtracer.config import RenderConfig

        with pytest.raises(ValueError):
            RenderConfig(**overrides).validate()

    def test_zero_depth_is_allowed(self):
        from src.pathtracer.config import RenderConfig

        RenderConfig(max_depth=0).validate()


class TestLogging:
    def test_setup_logging_does_not_stack_handlers(self):
        from src.pathtracer.logging_config import setup_logging

        logger = setup_logging("DEBUG", name="src.pathtracer.test_logging")
        setup_logging("WARNING", name="src.pathtracer.test_logging")

        assert len(logger.handlers) == 1
        assert logger.level == logging.WARNING
        logger.handlers.clear()

    def test_get_logger_hierarchy(self):
        from src.pathtracer.logging_config import PACKAGE_LOGGER, get_logger

        assert get_logger().name == PACKAGE_LOGGER
        assert get_logger("src.pathtracer.core").parent.name == PACKAGE_LOGGER

    def test_unknown_level_falls_back_to_info(self):
        from src.pathtracer.logging_config import setup_logging

        logger = setup_logging("chatty", name="src.pathtracer.test_level")
        assert logger.level == logging.INFO
        logger.handlers.clear()


class TestInitTaichi:
    def test_fast_math_is_off_by_default(self, monkeypatch):
        import taichi as ti

        from src.pathtracer.config import RenderConfig, init_taichi

        captured = {}
        monkeypatch.setattr(ti, "init", lambda **kwargs: captured.update(kwargs))

        init_taichi(RenderConfig(seed=3, num_threads=2))
        assert captured["fast_math"] is False
        assert captured["random_seed"] == 3
        assert captured["cpu_max_num_threads"] == 2
        assert captured["arch"] == ti.cpu
