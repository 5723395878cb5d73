"""Contract for remote AI enhancement and generation calls.

The core treats these calls as opaque: it performs no retries or backoff,
and callers decide what to do with a failed result.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class EnhancementResult(BaseModel):
    """Outcome of a remote enhancement or generation call."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    success: bool = Field(False, description="Whether the provider produced output")
    output_url: Optional[str] = Field(None, description="Processed video/audio location")
    image_url: Optional[str] = Field(None, description="Generated image location")
    error: Optional[str] = Field(None, description="Provider error message")

    @classmethod
    def from_response(cls, data: Optional[Dict[str, Any]]) -> "EnhancementResult":
        """Normalize a provider payload.

        Missing or malformed payloads become an unsuccessful result instead
        of raising.
        """
        if not isinstance(data, dict):
            return cls(success=False, error="Empty response from provider")
        return cls(
            success=bool(data.get("success", False)),
            output_url=data.get("outputUrl") or data.get("output_url"),
            image_url=data.get("imageUrl") or data.get("image_url"),
            error=data.get("error"),
        )

    @property
    def url(self) -> Optional[str]:
        """Whichever output location the provider returned."""
        return self.output_url or self.image_url


class EnhancementService(ABC):
    """Remote enhancement/generation provider."""

    @abstractmethod
    async def process(
        self,
        tool: str,
        payload: Union[bytes, str],
        options: Optional[Dict[str, Any]] = None,
    ) -> EnhancementResult:
        """Run a tool on binary media or a text prompt.

        Args:
            tool: Tool or generation type identifier
            payload: Media bytes or a prompt
            options: Provider-specific options

        Returns:
            EnhancementResult; failures are reported in the result, not raised
        """
        pass
