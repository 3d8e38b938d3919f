"""symbolic 命令行入口"""
