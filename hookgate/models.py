"""Endpoint configuration and the canonical update documents sent downstream.

The serialized form of an update is consumed by the downstream notification
API, so the wire names (``Kind``, ``Source``, ``Name``...) and their order are
fixed. Attributes use Python names and carry the wire name as an alias.
"""

from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

HEADS_PREFIX = "refs/heads/"


class SourceKind(str, Enum):
    DOCKERHUB = "DockerHub"
    GITHUB = "GitHub"
    GITLAB = "GitLab"
    BITBUCKET_CLOUD = "BitbucketCloud"
    BITBUCKET_SERVER = "BitbucketServer"


class Endpoint(BaseModel):
    """A configured hook: which provider sends to it and where its key lives."""
    model_config = ConfigDict(frozen=True)

    source: SourceKind
    key_id: str


class _WireModel(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)


class ImageName(_WireModel):
    domain: str = Field("", alias="Domain")
    image: str = Field(alias="Image")


class ImageSource(_WireModel):
    name: ImageName = Field(alias="Name")


class GitSource(_WireModel):
    url: str = Field(alias="URL")
    branch: str = Field(alias="Branch")


class ImageUpdate(_WireModel):
    kind: Literal["image"] = Field("image", alias="Kind")
    source: ImageSource = Field(alias="Source")


class GitUpdate(_WireModel):
    kind: Literal["git"] = Field("git", alias="Kind")
    source: GitSource = Field(alias="Source")


def branch_from_ref(ref: str) -> str:
    """Strip ``refs/heads/`` from a branch ref; tags and other refs pass through."""
    if ref.startswith(HEADS_PREFIX):
        return ref[len(HEADS_PREFIX):]
    return ref


def image_update(image: str, domain: str = "") -> ImageUpdate:
    return ImageUpdate(source=ImageSource(name=ImageName(domain=domain, image=image)))


def git_update(url: str, ref: str) -> GitUpdate:
    return GitUpdate(source=GitSource(url=url, branch=branch_from_ref(ref)))


def to_wire(update: ImageUpdate | GitUpdate) -> bytes:
    """Serialize an update to the compact JSON the downstream API expects."""
    return update.model_dump_json(by_alias=True).encode("utf-8")