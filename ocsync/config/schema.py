# OCSYNC Configuration Schema
# Pydantic models for the registry companion configuration

from enum import Enum

from pydantic import BaseModel, Field, field_validator


class InstallMode(str, Enum):
    """Install destination mode."""

    GLOBAL = "global"
    LOCAL = "local"


class AboutConfig(BaseModel):
    """About screen text supplied by a registry."""

    lines: list[str] = Field(default_factory=lambda: ["Configure this registry to show your own about text."])
    emphasis: str = Field(default="", description="Highlighted line")
    link: str = Field(default="", description="Registry homepage or repository link")
    link_note: str = Field(default="", description="Note shown next to the link")
    footer: str = Field(default="Press any key to return...", description="Footer line")


class UiConfig(BaseModel):
    """Presentation text for a registry."""

    brand: str = Field(default="Opencode", description="Brand name shown in the header")
    product: str = Field(default="Workflows", description="Product name shown in the header")
    about: AboutConfig = Field(default_factory=AboutConfig)


class InstallConfig(BaseModel):
    """Install path policy."""

    global_dir: str = Field(description="Root install directory for global mode")
    local_dir: str = Field(description="Root install directory for local mode")
    prefix_types: list[str] = Field(
        default_factory=lambda: ["agent", "skill", "command"],
        description="Item types installed under the install root; others go relative to the working directory",
    )

    @field_validator("prefix_types")
    @classmethod
    def check_prefix_types(cls, v: list[str]) -> list[str]:
        """Reject unknown item types."""
        allowed = {"agent", "skill", "command", "doc"}
        unknown = [t for t in v if t not in allowed]
        if unknown:
            raise ValueError(f"Unknown item types: {', '.join(unknown)}")
        return v

    def root_for(self, mode: InstallMode) -> str:
        """Get the install root for a mode."""
        return self.global_dir if mode == InstallMode.GLOBAL else self.local_dir

    def is_prefixed(self, item_type: str) -> bool:
        """Check whether an item type installs under the install root."""
        return item_type in self.prefix_types


class AppConfig(BaseModel):
    """Root configuration model."""

    ui: UiConfig = Field(default_factory=UiConfig)
    install: InstallConfig
