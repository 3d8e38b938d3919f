"""结构化日志系统的单元测试"""

import json
import logging

import pytest

from symbolic.core.logger import (
    Logger,
    LoggerConfig,
    OperationScope,
    OperationTracer,
    configure_logger,
    get_logger,
    _operation_id,
)


@pytest.fixture(autouse=True)
def restore_logging():
    """每个测试结束后恢复默认日志配置"""
    yield
    configure_logger(LoggerConfig())
    Logger.clear_context()


class TestLoggerConfig:
    """测试 LoggerConfig 类"""

    def test_default_config(self):
        """测试默认配置"""
        config = LoggerConfig()

        assert config.log_dir is None
        assert config.level == "INFO"
        assert config.json_output is False
        assert config.console_output is False

    def test_from_dict(self, tmp_path):
        """测试从配置段构建"""
        config = LoggerConfig.from_dict(
            {"level": "warning", "json_output": True, "log_dir": str(tmp_path)}
        )

        assert config.level == "WARNING"
        assert config.json_output is True
        assert config.log_dir == tmp_path
        assert config.console_output is False

    def test_from_dict_verbose(self):
        """测试 verbose 强制 DEBUG 控制台输出"""
        config = LoggerConfig.from_dict({"level": "ERROR"}, verbose=True)

        assert config.level == "DEBUG"
        assert config.console_output is True


class TestLogger:
    """测试 Logger 类"""

    def test_get_logger_is_cached(self):
        """测试同名记录器只创建一次"""
        assert get_logger("cached") is get_logger("cached")
        assert get_logger("cached") is not get_logger("other")

    def test_bind_returns_new_logger(self):
        """测试绑定上下文"""
        logger = Logger("test")
        bound = logger.bind(target="/tmp/x")

        assert bound is not logger
        assert bound.name == "test"

    def test_build_context_includes_operation_id(self):
        """测试上下文包含操作 ID"""
        logger = Logger("test")
        Logger.set_operation_id("op-1")

        context = logger._build_context(key="value")

        assert context == {"operation_id": "op-1", "key": "value"}

    def test_loggers_live_under_package_namespace(self, caplog):
        """测试模块记录器挂在 symbolic 命名空间下"""
        logger = get_logger("namespace_test")

        with caplog.at_level(logging.INFO, logger="symbolic"):
            logger.info("Symlink created")

        assert [r.name for r in caplog.records] == ["symbolic.namespace_test"]

    def test_package_logger_has_null_handler(self):
        """测试未配置 logging 时不输出到 stderr"""
        handlers = logging.getLogger("symbolic").handlers

        assert any(isinstance(h, logging.NullHandler) for h in handlers)

    def test_json_log_file(self, tmp_path):
        """测试写入 JSON 日志文件"""
        configure_logger(LoggerConfig(log_dir=tmp_path, level="DEBUG", json_output=True))
        logger = get_logger("file_test")

        logger.info("Symlink created", target="/tmp/link")
        for handler in logging.getLogger().handlers:
            handler.flush()

        lines = (tmp_path / "symbolic.log").read_text().strip().splitlines()
        record = json.loads(lines[-1])
        assert record["event"] == "Symlink created"
        assert record["target"] == "/tmp/link"
        assert record["level"] == "info"

    def test_level_filtering(self, tmp_path):
        """测试低于配置级别的日志被过滤"""
        configure_logger(LoggerConfig(log_dir=tmp_path, level="WARNING", json_output=True))
        logger = get_logger("filter_test")

        logger.info("hidden")
        logger.warning("shown")
        for handler in logging.getLogger().handlers:
            handler.flush()

        content = (tmp_path / "symbolic.log").read_text()
        assert "hidden" not in content
        assert "shown" in content


class TestOperationScope:
    """测试 OperationScope 与 OperationTracer"""

    def test_scope_success(self):
        """测试正常结束"""
        with OperationScope("update", context={"path": "."}) as scope:
            assert _operation_id.get() == scope.operation_id

        stats = scope.get_stats()
        assert stats["status"] == "success"
        assert stats["name"] == "update"
        assert _operation_id.get() == ""

    def test_scope_failure_propagates(self):
        """测试异常继续传播并记录失败"""
        scope = OperationScope("break")

        with pytest.raises(RuntimeError):
            with scope:
                raise RuntimeError("boom")

        assert scope.exception_occurred is True
        assert scope.get_stats()["status"] == "failure"

    def test_tracer_unknown_operation(self):
        """测试结束未知操作"""
        tracer = OperationTracer()

        with pytest.raises(ValueError):
            tracer.end_operation("missing")
