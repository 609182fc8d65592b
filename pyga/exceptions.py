"""
例外類別

框架對外拋出的錯誤類型。
"""


class PygaError(Exception):
    """所有 pyga 錯誤的基類"""


class ConfigurationError(PygaError, ValueError):
    """
    演化引擎配置錯誤

    只在建構時拋出：基因組類型無效、運算子機率表為空或不合法、
    適應度函數缺失或不可呼叫等。
    """
