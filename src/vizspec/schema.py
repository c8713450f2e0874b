from __future__ import annotations

from typing import Any, Dict, List

from pydantic import BaseModel


class HostMetadataDTO(BaseModel):
    properties: Dict[str, str] = {}
    markers: List[str] = []
    client_config: Dict[str, Any] = {}
    modules: List[str] = []


class RenderResponseDTO(BaseModel):
    markup: List[str]
    metadata: HostMetadataDTO


class HashResponseDTO(BaseModel):
    content_hash: str
    generation: int
