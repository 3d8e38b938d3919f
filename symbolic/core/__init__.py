"""symbolic 核心模块：路径规范化、清单解析与链接生命周期"""
