"""findf 异常定义"""


class FindfError(Exception):
    """项目基础异常"""


class InputReadError(FindfError):
    """名单文件不存在、无法读取或不是有效的 UTF-8"""

    def __init__(self, path, reason: str = ""):
        self.path = path
        self.reason = reason
        message = f"无法读取名单文件: {path}"
        if reason:
            message += f" ({reason})"
        super().__init__(message)


class InvalidPathError(FindfError):
    pass


class TraversalSkip(FindfError):
    """遍历时单个条目的 I/O 错误，只跳过该条目"""

    def __init__(self, path, cause: Exception):
        self.path = path
        self.cause = cause
        super().__init__(f"跳过 {path}: {cause}")


class RunStateError(FindfError):
    pass


class ConfigError(FindfError):
    pass
