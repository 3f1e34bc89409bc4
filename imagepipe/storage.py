"""
Storage layer for imagepipe.
Handles all get and put operations in a single place, so we can easily handle new storage systems.

load_bytes(url)   - returns (data, urn) for a path, file: URL, http(s) URL or s3 URL
load_stdin(f)     - returns (data, urn) for a binary stream
save_bytes(path, data) - writes a file, creating any missing parent directories
"""

import os
import urllib.parse
import functools
import logging
from os.path import dirname,abspath

import boto3
import botocore.exceptions
import requests

from .constants import C
from .errors import SourceFetchError,WriteError

logger = logging.getLogger(__name__)

@functools.lru_cache(maxsize=4)
def s3_client():
    return boto3.session.Session().client('s3')

def local_path(url):
    """Strip a file:// or file: prefix"""
    for prefix in ('file://','file:'):
        if url.startswith(prefix):
            return url[len(prefix):]
    return url

def load_bytes(url):
    """Read all of the bytes named by url.
    :return: (data, urn) where urn identifies the source in Frame Records
    """
    o = urllib.parse.urlparse(url)
    logger.debug("url=%s o=%s",url,o)
    if o.scheme in ['http','https']:
        try:
            r = requests.get(url, timeout=C.DEFAULT_GET_TIMEOUT)
            r.raise_for_status()
        except requests.RequestException as e:
            raise SourceFetchError(f"cannot fetch {url}: {e}") from e
        return (r.content, url)
    elif o.scheme == 's3':
        try:
            obj = s3_client().get_object(Bucket=o.netloc, Key=o.path[1:])
            return (obj['Body'].read(), url)
        except (botocore.exceptions.BotoCoreError, botocore.exceptions.ClientError) as e:
            raise SourceFetchError(f"cannot fetch {url}: {e}") from e
    else:
        # anything else is a local path, even with a colon in it
        path = local_path(url)
        try:
            with open(path,'rb') as f:
                data = f.read()
        except (OSError, ValueError) as e:
            raise SourceFetchError(f"cannot read {path}: {e}") from e
        return (data, "file:" + abspath(path))

def load_stdin(f):
    """Read a binary stream until end of file."""
    try:
        return (f.read(), C.STDIN_URN)
    except OSError as e:
        raise SourceFetchError(f"cannot read from stdin: {e}") from e

def mkdirs(path):
    if path:
        logger.debug("mkdirs %s",path)
        os.makedirs(path, exist_ok = True)

def save_bytes(path, data):
    try:
        mkdirs(dirname(path))
        with open(path,'wb') as f:
            f.write(data)
    except OSError as e:
        raise WriteError(f"cannot write {path}: {e}") from e
