"""symbolic - 声明式符号链接管理工具"""

__version__ = "0.1.0"
