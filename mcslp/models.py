# minestat.py - A Minecraft server status checker
# Copyright (C) 2016-2023 Lloyd Dilley, Felix Ern (MindSolve)
# http://www.dilley.me/
#
# This program is free software; you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation; either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE. See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License along
# with this program; if not, write to the Free Software Foundation, Inc.,
# 51 Franklin Street, Fifth Floor, Boston, MA 02110-1301 USA.
#
# 本文件由 @molanp 进行优化与需求定制

import base64
import binascii
from dataclasses import dataclass
import re
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
import ujson

from .endpoint import Endpoint
from .exceptions import DecodeError


class _StatusModel(BaseModel):
    # 服务器可能发送任意扩展字段，全部保留
    model_config = ConfigDict(extra="allow", populate_by_name=True)


class Description(_StatusModel):
    """MOTD 聊天组件"""

    text: str = ""
    extra: list[Any] = Field(default_factory=list)


class PlayerSample(_StatusModel):
    name: str = ""
    id: str = ""


class Players(_StatusModel):
    max: int = 0
    online: int = 0
    sample: list[PlayerSample] = Field(default_factory=list)


class Version(_StatusModel):
    name: str = ""
    protocol: int = -1


class StatusRecord(_StatusModel):
    """
    状态响应 JSON 的结构化表示。

    未在此声明的字段（例如 Forge 的 `forgeData`）保存在 `model_extra` 中。
    """

    description: Description = Field(default_factory=Description)
    players: Players = Field(default_factory=Players)
    version: Version = Field(default_factory=Version)
    favicon: str | None = None
    """base64 编码的 `data:image/png;base64,...` 图标"""
    enforces_secure_chat: bool = Field(default=False, alias="enforcesSecureChat")
    previews_chat: bool = Field(default=False, alias="previewsChat")

    @field_validator("description", mode="before")
    @classmethod
    def _wrap_plain_description(cls, value: Any) -> Any:
        # The motd might be a string directly, not a json object
        if isinstance(value, str):
            return {"text": value}
        if isinstance(value, list):
            return {"text": "", "extra": value}
        return value

    @property
    def motd(self) -> str:
        """去除所有格式后的 MOTD（人类可读）"""
        return strip_motd_formatting(self.description.model_dump())

    @property
    def player_names(self) -> list[str]:
        return [player.name for player in self.players.sample]

    @property
    def favicon_bytes(self) -> bytes | None:
        """解码后的图标数据，没有图标或数据无法解码时返回 None"""
        if not self.favicon or "base64," not in self.favicon:
            return None
        try:
            return base64.b64decode(self.favicon.split("base64,", 1)[1], validate=True)
        except binascii.Error:
            return None


@dataclass(frozen=True)
class ServerStatus:
    """
    一次成功查询的结果。

    :param record: 结构化的状态记录
    :param raw_json: 服务器返回的原始 JSON 文本
    :param endpoint: 实际连接的地址
    :param latency: 建立连接所用时间（毫秒）
    """

    record: StatusRecord
    raw_json: str
    endpoint: Endpoint
    latency: int | None = None


def strip_motd_formatting(raw_motd: str | dict | list) -> str:
    """
    用于去除 MOTD 中所有格式代码的函数。
    支持 JSON 聊天组件（以字典或列表形式）以及旧版 `§` 格式代码

    :param raw_motd: 原始 MOTD
    """
    if isinstance(raw_motd, str):
        return re.sub(r"§.", "", raw_motd)

    if isinstance(raw_motd, list):
        return "".join(strip_motd_formatting(sub) for sub in raw_motd)

    if isinstance(raw_motd, dict):
        stripped_motd = strip_motd_formatting(raw_motd.get("text", ""))
        for sub in raw_motd.get("extra") or []:
            stripped_motd += strip_motd_formatting(sub)
        return stripped_motd

    return ""


def decode_status(payload: bytes) -> StatusRecord:
    """
    默认的 JSON 解码服务：字节进，`StatusRecord` 出。

    :param payload: 状态响应中的 JSON 负载
    :raises DecodeError: 不是合法的 UTF-8 / JSON，或不是状态对象
    """
    try:
        payload_obj = ujson.loads(payload.decode("utf8"))
    except ValueError as e:  # ujson.JSONDecodeError, UnicodeDecodeError
        raise DecodeError(f"Malformed status JSON: {e}") from e

    if not isinstance(payload_obj, dict):
        raise DecodeError("Status response is not a JSON object")

    try:
        return StatusRecord.model_validate(payload_obj)
    except ValidationError as e:
        raise DecodeError(f"Unexpected status response: {e}") from e
