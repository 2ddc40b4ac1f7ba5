from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class SlpConfig(BaseSettings):
    """
    查询配置，可通过 `MCSLP_` 前缀的环境变量或 `.env` 文件覆盖。

    例如 `MCSLP_TIMEOUT=2.5` 将读取超时设为 2.5 秒。
    """

    model_config = SettingsConfigDict(
        env_prefix="MCSLP_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    timeout: float = Field(default=5.0, gt=0)
    """连接与读取超时（秒）"""
    protocol_version: int = Field(default=1156, ge=-1)
    """握手包中声明的协议版本号"""
    default_port: int = Field(default=25565, ge=0, le=65535)
    """未指定端口时使用的默认 TCP 端口"""
    resolve_srv: bool = Field(default=True)
    """未指定端口时是否查询 `_minecraft._tcp` SRV 记录"""
    dns_timeout: float = Field(default=5.0, gt=0)
    """单次 DNS 查询超时（秒）"""
    dns_lifetime: float = Field(default=10.0, gt=0)
    """一次解析（含重试）的总时限（秒）"""
    strict_frame: bool = Field(default=False)
    """是否校验响应帧的包 ID 与外层长度"""


config: SlpConfig = SlpConfig()
