"""配置管理器

提供 .symbolic.yaml 配置文件的加载、验证、合并和保存功能。
配置文件是可选的，不存在时使用默认配置。
"""

import copy
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from symbolic.core.exceptions import ConfigException, ConfigIOError, ConfigParseError, ConfigValidationError
from symbolic.core.logger import get_logger

logger = get_logger("config_manager")

VALID_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]


class ConfigManager:
    """配置管理器

    负责加载、验证、合并和保存 .symbolic.yaml 配置文件。
    """

    DEFAULT_CONFIG = {
        "manifest": {
            "filename": ".sym",
        },
        "logging": {
            "level": "INFO",
            "json_output": False,
            "log_dir": None,
        },
        "display": {
            "colors": True,
        },
    }

    CONFIG_FILENAME = ".symbolic.yaml"

    def __init__(self, project_root: Optional[Path] = None):
        """初始化配置管理器

        Args:
            project_root: 配置文件所在目录，默认为当前目录
        """
        self.project_root = Path(project_root) if project_root else Path.cwd()
        self._config: Optional[Dict[str, Any]] = None
        logger.debug("ConfigManager initialized", project_root=str(self.project_root))

    @property
    def config_path(self) -> Path:
        """获取配置文件路径"""
        return self.project_root / self.CONFIG_FILENAME

    def get_default_config(self) -> Dict[str, Any]:
        """获取默认配置

        Returns:
            默认配置字典的深拷贝
        """
        return copy.deepcopy(self.DEFAULT_CONFIG)

    def load_config(self, config_path: Optional[Path] = None) -> Dict[str, Any]:
        """加载配置文件

        Args:
            config_path: 配置文件路径，如果为 None 则使用默认路径

        Returns:
            配置字典

        Raises:
            ConfigIOError: 文件读取失败时抛出
            ConfigParseError: YAML 解析失败时抛出
            ConfigValidationError: 配置验证失败时抛出
        """
        path = config_path or self.config_path

        # 如果文件不存在，返回默认配置
        if not path.exists():
            logger.debug("Configuration file not found, using defaults", path=str(path))
            self._config = self.get_default_config()
            return self._config

        logger.info("Loading configuration", path=str(path))

        try:
            with open(path, "r", encoding="utf-8") as f:
                config_data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            logger.error("Failed to parse YAML configuration", path=str(path), error=str(e))
            raise ConfigParseError(f"Failed to parse YAML configuration: {e}", details=str(e))
        except IOError as e:
            logger.error("Failed to read configuration file", path=str(path), error=str(e))
            raise ConfigIOError(f"Failed to read configuration file: {e}", details=str(e))

        if config_data is None:
            logger.info("Configuration file is empty, using defaults", path=str(path))
            config_data = self.get_default_config()
        elif not isinstance(config_data, dict):
            raise ConfigValidationError(
                "Configuration validation failed: top level must be a mapping",
                details=str(path),
            )
        else:
            config_data = self.merge_configs(self.get_default_config(), config_data)

        self.validate_config(config_data)
        self._config = config_data
        logger.info("Configuration loaded successfully", path=str(path))
        return self._config

    def validate_config(self, config: Optional[Dict[str, Any]] = None) -> bool:
        """验证配置结构和值

        Args:
            config: 配置字典，如果为 None 则验证当前加载的配置

        Returns:
            配置有效返回 True

        Raises:
            ConfigValidationError: 配置验证失败时抛出
        """
        cfg = config if config is not None else self._config

        if cfg is None:
            logger.error("No configuration to validate")
            raise ConfigValidationError("No configuration loaded or provided")

        errors = []

        # 检查必需的顶级字段
        for section in ["manifest", "logging", "display"]:
            if section not in cfg:
                errors.append(f"Missing required section: {section}")
            elif not isinstance(cfg[section], dict):
                errors.append(f"{section} must be a dictionary")

        manifest = cfg.get("manifest")
        if isinstance(manifest, dict):
            filename = manifest.get("filename")
            if not isinstance(filename, str) or not filename:
                errors.append("manifest.filename must be a non-empty string")
            elif "/" in filename:
                errors.append("manifest.filename must be a file name, not a path")

        logging_cfg = cfg.get("logging")
        if isinstance(logging_cfg, dict):
            level = logging_cfg.get("level")
            if not isinstance(level, str) or level.upper() not in VALID_LOG_LEVELS:
                errors.append(f"logging.level must be one of {VALID_LOG_LEVELS}")
            if not isinstance(logging_cfg.get("json_output", False), bool):
                errors.append("logging.json_output must be a boolean")
            log_dir = logging_cfg.get("log_dir")
            if log_dir is not None and not isinstance(log_dir, str):
                errors.append("logging.log_dir must be a string")

        display = cfg.get("display")
        if isinstance(display, dict):
            if "colors" in display and not isinstance(display["colors"], bool):
                errors.append("display.colors must be a boolean")

        if errors:
            error_msg = "; ".join(errors)
            logger.error("Configuration validation failed", errors=errors)
            raise ConfigValidationError(f"Configuration validation failed: {error_msg}")

        return True

    def merge_configs(self, base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
        """深度合并配置，override 中的值优先

        Args:
            base: 基础配置
            override: 覆盖配置

        Returns:
            合并后的配置
        """
        result = copy.deepcopy(base)

        for key, value in override.items():
            base_value = result.get(key)
            # 如果两个值都是字典，递归合并
            if isinstance(base_value, dict) and isinstance(value, dict):
                result[key] = self.merge_configs(base_value, value)
            else:
                result[key] = copy.deepcopy(value)

        return result

    def save_config(self, config: Optional[Dict[str, Any]] = None, path: Optional[Path] = None) -> None:
        """保存配置到文件

        Args:
            config: 配置字典，如果为 None 则保存当前配置
            path: 保存路径，如果为 None 则使用默认路径

        Raises:
            ConfigIOError: 文件写入失败时抛出
            ConfigValidationError: 配置验证失败时抛出
        """
        cfg = config or self._config
        save_path = path or self.config_path

        if cfg is None:
            logger.error("No configuration to save")
            raise ConfigException("No configuration to save")

        self.validate_config(cfg)

        logger.info("Saving configuration", path=str(save_path))

        try:
            save_path.parent.mkdir(parents=True, exist_ok=True)

            with open(save_path, "w", encoding="utf-8") as f:
                yaml.dump(
                    cfg,
                    f,
                    default_flow_style=False,
                    sort_keys=False,
                    allow_unicode=True,
                )
        except IOError as e:
            logger.error("Failed to write configuration file", path=str(save_path), error=str(e))
            raise ConfigIOError(f"Failed to write configuration file: {e}", details=str(e))

        self._config = cfg

    def get(self, key_path: str, default: Any = None) -> Any:
        """获取配置值，支持点号分隔的路径

        例如: get("manifest.filename") 返回 .sym
        """
        if self._config is None:
            self.load_config()

        value = self._config
        for key in key_path.split("."):
            if isinstance(value, dict) and key in value:
                value = value[key]
            else:
                return default

        return value

    def set(self, key_path: str, value: Any) -> None:
        """设置配置值，支持点号分隔的路径"""
        if self._config is None:
            self.load_config()

        keys = key_path.split(".")
        target = self._config

        for key in keys[:-1]:
            if key not in target:
                target[key] = {}
            target = target[key]

        target[keys[-1]] = value
        logger.debug("Set configuration value", key_path=key_path)

    @property
    def manifest_filename(self) -> str:
        return self.get("manifest.filename", ".sym")

    def reload(self) -> Dict[str, Any]:
        """重新加载配置文件"""
        self._config = None
        return self.load_config()
