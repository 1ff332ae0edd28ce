"""
FlashParse 自定义异常类模块

定义项目专用的异常类层次结构。

注意：解析核心对任何内容都不会抛出异常，只有输入类型错误（非字符串）
才会在边界处以 InputTypeError 报告。
"""


class FlashParseError(Exception):
    """FlashParse 基础异常类

    所有 FlashParse 特定异常的基类。
    """


class ConfigurationError(FlashParseError):
    """配置错误异常

    当配置加载、验证或处理失败时抛出。
    """


class ValidationError(FlashParseError):
    """验证错误异常

    当调用方传入的生成参数（描述、请求数量等）无效时抛出。
    """


class TemplateError(FlashParseError):
    """模板错误异常

    当提示词模板加载或渲染失败时抛出。
    """


class InputTypeError(FlashParseError, TypeError):
    """输入类型错误异常

    当解析管道收到非字符串输入时抛出。这是编程错误，不应被当作运行时条件恢复。
    """
