"""
Hook Sources

Per-provider adapters that authenticate hook requests and normalize them.
"""

from hookgate.models import SourceKind

from .base import BaseSource
from .bitbucket import BitbucketCloudSource, BitbucketServerSource
from .dockerhub import DockerHubSource
from .github import GitHubSource
from .gitlab import GitLabSource

SOURCES: dict[SourceKind, BaseSource] = {
    source.kind: source
    for source in (
        DockerHubSource(),
        GitHubSource(),
        GitLabSource(),
        BitbucketCloudSource(),
        BitbucketServerSource(),
    )
}

__all__ = [
    "SOURCES",
    "BaseSource",
    "BitbucketCloudSource",
    "BitbucketServerSource",
    "DockerHubSource",
    "GitHubSource",
    "GitLabSource",
]
