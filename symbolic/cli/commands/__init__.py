"""symbolic 子命令"""
