import hashlib
from dataclasses import dataclass
from urllib.parse import quote

# Marks left unescaped in a single path component, on top of alphanumerics and "-_.~".
SEGMENT_SAFE = "!*'()"


@dataclass(frozen=True)
class ContentHashes:
    object_hash: str
    dedup_hash: str


@dataclass(frozen=True)
class StoredObjectLocation:
    directory_path: tuple
    file_name: str

    @property
    def directory(self) -> str:
        return "/".join(self.directory_path)

    @property
    def full_path(self) -> str:
        if self.directory_path:
            return f"{self.directory}/{self.file_name}"
        return self.file_name


def hash_object(data: bytes) -> str:
    """Return the id git assigns to ``data`` stored as a blob."""
    header = f"blob {len(data)}\0".encode()
    return hashlib.sha1(header + data).hexdigest()


def dedup_hash(data: bytes) -> str:
    return hashlib.md5(data, usedforsecurity=False).hexdigest()


def hash_content(data: bytes) -> ContentHashes:
    return ContentHashes(object_hash=hash_object(data), dedup_hash=dedup_hash(data))


def encode_segment(segment: str) -> str:
    return quote(segment, safe=SEGMENT_SAFE)


def encode_path(path: str) -> tuple:
    return tuple(encode_segment(part) for part in path.split('/') if part)


def file_extension(file_name: str) -> str:
    # "README" has no extension and ends up stored as "<md5>."
    _, dot, ext = file_name.rpartition('.')
    return ext if dot else ''


def build_location(path: str, dedup: str, original_name: str) -> StoredObjectLocation:
    return StoredObjectLocation(
        directory_path=encode_path(path),
        file_name=f"{dedup}.{file_extension(original_name)}",
    )
