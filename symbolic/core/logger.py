"""结构化日志系统

支持链路追踪的结构化日志记录器。使用 structlog 库提供控制台或 JSON 输出格式。"""

import logging
import time
import traceback
import contextvars
import uuid
from typing import Any, Dict, Optional
from pathlib import Path

import structlog


# 全局链路上下文变量
_operation_id: contextvars.ContextVar[str] = contextvars.ContextVar(
    'operation_id', default=""
)


class LoggerConfig:
    """日志配置类"""

    def __init__(
        self,
        log_dir: Optional[Path] = None,
        level: str = "INFO",
        json_output: bool = False,
        console_output: bool = False,
    ):
        """初始化日志配置
        Args:
            log_dir: 日志目录，如果为 None 则不写入文件
            level: 日志级别 (DEBUG, INFO, WARNING, ERROR)
            json_output: 是否输出 JSON 格式
            console_output: 是否输出到控制台
        """
        self.log_dir = log_dir
        self.level = level
        self.json_output = json_output
        self.console_output = console_output

    @classmethod
    def from_dict(cls, data: Dict[str, Any], verbose: bool = False) -> 'LoggerConfig':
        """从配置文件的 logging 段构建日志配置

        Args:
            data: logging 配置字典
            verbose: 是否强制开启 DEBUG 控制台输出
        """
        log_dir = data.get("log_dir")
        return cls(
            log_dir=Path(log_dir).expanduser() if log_dir else None,
            level="DEBUG" if verbose else str(data.get("level", "INFO")).upper(),
            json_output=bool(data.get("json_output", False)),
            console_output=verbose,
        )


class Logger:
    """结构化日志记录器

    提供结构化日志记录，支持链路追踪。
    """

    def __init__(self, name: str = "symbolic", config: Optional[LoggerConfig] = None):
        """初始化日志记录器

        Args:
            name: 日志记录器名称
            config: 日志配置对象
        """
        self.name = name
        self.config = config or LoggerConfig()
        self.logger = structlog.get_logger(_qualified_name(name))

    def debug(self, event: str, **kwargs) -> None:
        """记录 DEBUG 级别日志"""
        self._log("debug", event, **kwargs)

    def info(self, event: str, **kwargs) -> None:
        """记录 INFO 级别日志"""
        self._log("info", event, **kwargs)

    def warning(self, event: str, **kwargs) -> None:
        """记录 WARNING 级别日志"""
        self._log("warning", event, **kwargs)

    def error(self, event: str, **kwargs) -> None:
        """记录 ERROR 级别日志"""
        self._log("error", event, **kwargs)

    def bind(self, **kwargs) -> 'Logger':
        """绑定上下文信息到日志记录器

        Args:
            **kwargs: 要绑定的上下文信息

        Returns:
            新的日志记录器实例，绑定了指定的上下文
        """
        new_logger = Logger(self.name, self.config)
        new_logger.logger = self.logger.bind(**kwargs)
        return new_logger

    def _log(self, level: str, event: str, **kwargs) -> None:
        """内部日志记录方法"""
        context = self._build_context(**kwargs)

        log_method = getattr(self.logger, level)
        log_method(event, **context)

    def _build_context(self, **kwargs) -> Dict[str, Any]:
        """构建日志上下文

        Returns:
            包含链路信息和其他上下文的字典
        """
        context = {}

        operation_id = _operation_id.get()
        if operation_id:
            context['operation_id'] = operation_id

        context.update(kwargs)

        return context

    @staticmethod
    def set_operation_id(operation_id: str) -> None:
        """设置操作 ID"""
        _operation_id.set(operation_id)

    @staticmethod
    def clear_context() -> None:
        """清除所有链路上下文"""
        _operation_id.set("")


class OperationTracer:
    """操作追踪器

    用于追踪操作的执行过程，包括开始、结束、异常等事件。
    """

    def __init__(self, logger: Optional[Logger] = None):
        self.logger = logger or get_logger()
        self.operations: Dict[str, Dict[str, Any]] = {}

    def start_operation(
        self,
        operation_name: str,
        operation_id: Optional[str] = None,
        **context
    ) -> str:
        """记录操作开始

        Returns:
            生成或提供的操作 ID
        """
        op_id = operation_id or str(uuid.uuid4())

        self.operations[op_id] = {
            'name': operation_name,
            'start_time': time.time(),
            'context': context,
            'status': 'running',
        }

        self.logger.info(
            f'{operation_name}_started',
            operation_id=op_id,
            **context,
        )

        return op_id

    def end_operation(
        self,
        operation_id: str,
        status: str = "success",
        **context
    ) -> Dict[str, Any]:
        """记录操作结束

        Args:
            operation_id: 操作 ID
            status: 操作状态 ("success", "failure")
            **context: 额外的上下文信息

        Returns:
            包含操作统计的字典
        """
        if operation_id not in self.operations:
            raise ValueError(f"Operation {operation_id} not found")

        op_data = self.operations[operation_id]
        duration_ms = int((time.time() - op_data['start_time']) * 1000)

        op_data['status'] = status
        op_data['duration_ms'] = duration_ms

        event_name = f"{op_data['name']}_{'succeeded' if status == 'success' else 'failed'}"

        self.logger.info(
            event_name,
            operation_id=operation_id,
            duration_ms=duration_ms,
            status=status,
            **context,
        )

        return {
            'operation_id': operation_id,
            'duration_ms': duration_ms,
            'status': status,
        }

    def record_exception(
        self,
        operation_id: str,
        exception: BaseException,
        **context
    ) -> None:
        """记录操作中的异常"""
        if operation_id not in self.operations:
            raise ValueError(f"Operation {operation_id} not found")

        op_data = self.operations[operation_id]

        self.logger.error(
            f"{op_data['name']}_error",
            operation_id=operation_id,
            error_type=type(exception).__name__,
            error_message=str(exception),
            traceback=traceback.format_exc(),
            **context,
        )

    def get_operation_stats(self, operation_id: str) -> Optional[Dict[str, Any]]:
        """获取操作统计信息，不存在时返回 None"""
        return self.operations.get(operation_id)


class OperationScope:
    """操作范围上下文管理器

    提供 with 语句支持的操作追踪上下文。
    自动处理操作的开始、结束和异常记录。
    """

    def __init__(
        self,
        operation_name: str,
        context: Optional[Dict[str, Any]] = None,
        logger: Optional[Logger] = None,
        tracer: Optional[OperationTracer] = None,
        operation_id: Optional[str] = None,
    ):
        self.operation_name = operation_name
        self.context = context or {}
        self.logger = logger or get_logger()
        self.tracer = tracer or OperationTracer(self.logger)
        self.operation_id = operation_id or str(uuid.uuid4())
        self.exception_occurred = False

    def __enter__(self) -> 'OperationScope':
        Logger.set_operation_id(self.operation_id)
        self.tracer.start_operation(
            self.operation_name,
            operation_id=self.operation_id,
            **self.context
        )
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        """退出操作范围

        Returns:
            False，表示异常将继续传播
        """
        if exc_type is not None:
            self.exception_occurred = True
            self.tracer.record_exception(
                self.operation_id,
                exc_val,
                **self.context
            )
            self.tracer.end_operation(
                self.operation_id,
                status="failure",
                error_type=exc_type.__name__,
                **self.context
            )
        else:
            self.tracer.end_operation(
                self.operation_id,
                status="success",
                **self.context
            )

        # 仅清除当前操作的 ID，不影响外层操作
        if _operation_id.get() == self.operation_id:
            Logger.clear_context()
        return False

    def get_stats(self) -> Optional[Dict[str, Any]]:
        """获取操作统计信息"""
        return self.tracer.get_operation_stats(self.operation_id)


def _setup_structlog(config: LoggerConfig, configure_stdlib: bool = True) -> None:
    """按日志配置初始化 stdlib logging 与 structlog

    Args:
        config: 日志配置
        configure_stdlib: 是否同时接管 stdlib 根记录器；导入时不接管
    """
    handlers = []

    if config.console_output:
        handlers.append(logging.StreamHandler())

    if config.log_dir:
        log_dir = Path(config.log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_dir / "symbolic.log"))

    if configure_stdlib:
        # 没有任何输出目标时静默，避免 logging.lastResort 把日志打到 stderr
        if not handlers:
            handlers.append(logging.NullHandler())
        logging.basicConfig(
            handlers=handlers,
            level=getattr(logging, config.level, logging.INFO),
            format="%(message)s",
            force=True,
        )

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer()
            if config.json_output
            else structlog.dev.ConsoleRenderer(colors=False),
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        # 允许 configure_logger 在模块级 logger 创建之后重新配置
        cache_logger_on_first_use=False,
    )


ROOT_LOGGER_NAME = "symbolic"


def _qualified_name(name: str) -> str:
    """把记录器名称挂到 symbolic 命名空间下"""
    if name == ROOT_LOGGER_NAME or name.startswith(ROOT_LOGGER_NAME + "."):
        return name
    return f"{ROOT_LOGGER_NAME}.{name}"


_config: LoggerConfig = LoggerConfig()
_loggers: Dict[str, Logger] = {}
_setup_structlog(_config, configure_stdlib=False)

# 作为库被导入且宿主未配置 logging 时保持静默
logging.getLogger(ROOT_LOGGER_NAME).addHandler(logging.NullHandler())


def get_logger(name: str = "symbolic") -> Logger:
    """获取日志记录器实例

    同名记录器只创建一次。
    """
    if name not in _loggers:
        _loggers[name] = Logger(name, _config)
    return _loggers[name]


def configure_logger(config: LoggerConfig) -> None:
    """配置全局日志记录器

    已经创建的记录器会沿用新的配置。
    """
    global _config
    _config = config
    _setup_structlog(config)
    for logger in _loggers.values():
        logger.config = config
