"""symbolic 异常体系"""


class SymbolicException(Exception):
    """基础异常类"""
    def __init__(self, message: str, details=None):
        self.message = message
        self.details = details
        super().__init__(self.message)


# 路径相关异常
class PathException(SymbolicException):
    """路径规范化异常"""
    line = None

    def at_line(self, line: int) -> 'PathException':
        """标注出错的清单行号"""
        self.line = line
        self.message = f"Line {line}: {self.message}"
        self.args = (self.message,)
        return self


class EmptyPathError(PathException):
    """路径为空"""
    def __init__(self):
        super().__init__("Empty path")


class HomeDirectoryUnresolved(PathException):
    """无法确定 HOME 目录"""
    def __init__(self, raw: str):
        self.raw = raw
        super().__init__(
            "$HOME environment variable is not defined.",
            details={"path": raw},
        )


# 清单相关异常
class ManifestException(SymbolicException):
    """清单异常"""
    pass


class ManifestSyntaxError(ManifestException):
    """清单行格式错误"""
    def __init__(self, line: int, text: str):
        self.line = line
        self.text = text
        super().__init__(
            f"Syntax error in line {line}.\n"
            f"Expected the following pattern:\n"
            f"\tSRC_PATH -> DEST_PATH\n"
            f"Found:\n"
            f"\t{text}",
            details={"line": line, "text": text},
        )


class ManifestNotFound(ManifestException):
    """清单文件不存在"""
    def __init__(self, path):
        self.path = path
        super().__init__(
            f"Couldn't find a `{path.name}` file in the directory: {path.parent}",
            details={"path": str(path)},
        )


class ManifestIOError(ManifestException):
    """清单文件读取失败"""
    pass


# 符号链接异常
class LinkException(SymbolicException):
    """符号链接异常"""
    pass


class NoParentDirectoryError(LinkException):
    """目标路径没有父目录"""
    def __init__(self, target: str):
        self.target = target
        super().__init__(
            f"Failed to create link directory. {target} has no parent directory",
            details={"target": target},
        )


class DirectoryCreateError(LinkException):
    """父目录创建失败"""
    def __init__(self, directory: str, error: Exception):
        self.directory = directory
        self.error = error
        super().__init__(
            f"Failed to create link directory {directory}.\n{error}",
            details={"directory": directory, "error": str(error)},
        )


class LinkCreateError(LinkException):
    """符号链接创建失败"""
    def __init__(self, source: str, target: str, error: Exception):
        self.source = source
        self.target = target
        self.error = error
        super().__init__(
            f"Failed to form the following link:\n"
            f"\t{source} -> {target},\n"
            f"Error: {error}",
            details={"source": source, "target": target, "error": str(error)},
        )


class NotASymlinkError(LinkException):
    """路径不是符号链接"""
    def __init__(self, target: str):
        self.target = target
        super().__init__(
            f"{target} is not a symbolic link",
            details={"target": target},
        )


class UnlinkError(LinkException):
    """符号链接删除失败"""
    def __init__(self, target: str, error: OSError):
        self.target = target
        self.error = error
        super().__init__(
            f"Failed to break the link {target}.\nError: {error}",
            details={"target": target, "error": str(error)},
        )


class BatchLinkError(LinkException):
    """批量创建时出现一个或多个失败"""
    def __init__(self, report):
        self.report = report
        self.failures = [(result.pair, result.error) for result in report.failed]
        super().__init__(
            report.error_message(),
            details={"failed": len(self.failures), "total": len(report)},
        )


# 配置相关异常
class ConfigException(SymbolicException):
    """配置异常"""
    pass


class ConfigParseError(ConfigException):
    """配置解析失败"""
    pass


class ConfigIOError(ConfigException):
    """配置文件读写失败"""
    pass


class ConfigValidationError(ConfigException):
    """配置验证失败"""
    pass
