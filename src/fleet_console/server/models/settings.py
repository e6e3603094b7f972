"""Notification settings models."""

from __future__ import annotations

from typing import Any

from sqlalchemy import Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from fleet_console.server.models.base import Base, UpdatedAtMixin


class SlackChannel(Base, UpdatedAtMixin):
    """Slack channel that receives notifications for one form type."""

    __tablename__ = "slack_channel"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    form_type: Mapped[str] = mapped_column(String, nullable=False, unique=True)
    channel_id: Mapped[str] = mapped_column(String, nullable=False)
    channel_name: Mapped[str | None] = mapped_column(String, nullable=True)

    def to_wire(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "formType": self.form_type,
            "channelId": self.channel_id,
            "channelName": self.channel_name,
            "updatedAt": self.updated_at,
        }


class AppSetting(Base, UpdatedAtMixin):
    """Key/value application setting (secrets included)."""

    __tablename__ = "app_setting"

    key: Mapped[str] = mapped_column(String, primary_key=True)
    value: Mapped[str] = mapped_column(Text, nullable=False)
