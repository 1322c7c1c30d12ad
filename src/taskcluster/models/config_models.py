"""Configuration models for storage contexts.

A context names one storage backend. The active context decides which
repository implementation the application is wired with at startup.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field, model_validator

StorageType = Literal["memory", "versioned-memory", "sqlite"]


class OutputConfig(BaseModel):
    """Output configuration."""

    format: str = Field(default="pretty")


class RetryConfig(BaseModel):
    """Caller-side retry policy for optimistic-concurrency conflicts."""

    conflict_attempts: int = Field(default=3, ge=1)


class Context(BaseModel):
    """Context configuration for a storage backend.

    Represents an in-process store or a SQLite-backed versioned table.
    """

    name: str = Field(..., description="Unique context name")
    type: StorageType = Field(..., description="Storage backend type")
    source: str | None = Field(default=None, description="Database path (sqlite only)")
    description: str = Field(default="", description="Human-readable description")

    @model_validator(mode="after")
    def validate_source(self) -> Context:
        """Validate source based on context type."""
        if self.source is not None:
            self.source = self.source.strip() or None
        if self.type == "sqlite" and not self.source:
            raise ValueError("source is required for sqlite contexts")
        return self


class AppConfig(BaseModel):
    """Main Task Cluster configuration"""

    current_context_name: str = Field(
        default="local", description="Active context name"
    )
    contexts: list[Context] = Field(
        default_factory=list, description="Available contexts"
    )

    output: OutputConfig = Field(default_factory=OutputConfig)
    retry: RetryConfig = Field(default_factory=RetryConfig)

    def get_context(self, name: str) -> Context:
        """Get context by name."""
        for ctx in self.contexts:
            if ctx.name == name:
                return ctx
        raise ValueError(f"Context '{name}' not found")

    def get_current_context(self) -> Context:
        """Get the currently active context."""
        return self.get_context(self.current_context_name)
