from __future__ import annotations
import os
from flask import Blueprint, send_from_directory
from broresolve.services.storage import get_storage

media_bp = Blueprint('media', __name__)


@media_bp.get('/<path:key>')
def serve_media(key: str):
    storage = get_storage()
    # path_for rejects keys escaping the storage root
    path = storage.path_for(key)
    return send_from_directory(storage.root, os.path.relpath(path, storage.root))
