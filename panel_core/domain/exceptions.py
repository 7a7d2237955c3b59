"""统一业务异常模型。

所有跨模块抛出的业务级错误都应该继承自 BusinessError，
便于在 API 层统一捕获，或在 Provider 适配器边界转换为失败结果。

传播策略：
- ValidationError（INVALID_INPUT）是唯一会中止整个请求的错误，映射为 HTTP 400。
- 其余错误（缺少凭证、网络/HTTP/超时）只影响对应 Provider 的结果槽位。
"""


class BusinessError(Exception):
    """业务异常基类。

    Attributes:
        code: 机器可读错误码（如 "INVALID_INPUT"）。
        message: 用户可读错误信息。
        http_status: 映射到 HTTP 时可用的状态码，默认 400。
        extra: 其他补充字段（例如 provider）。
    """

    def __init__(self, code: str, message: str, http_status: int = 400, **extra):
        self.code = code
        self.message = message
        self.http_status = http_status
        self.extra = extra
        super().__init__(message)


class ValidationError(BusinessError):
    """参数或配置校验失败。"""


class MissingCredentialError(ValidationError):
    """Provider 的访问凭证未配置，此时不会发起任何网络请求。"""


class TransportError(BusinessError):
    """与 Provider 通信失败的基类。"""


class NetworkError(TransportError):
    """网络层错误，例如 DNS 失败、连接被拒绝等。"""


class ApiError(TransportError):
    """第三方 API 返回非 2xx 时抛出，http_status 为上游状态码。"""


class ProviderTimeoutError(TransportError):
    """单个 Provider 调用超过时间预算。"""
