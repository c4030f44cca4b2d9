import logging
import threading

import firebase_admin
from firebase_admin import credentials, firestore

logger = logging.getLogger(__name__)

_init_lock = threading.Lock()


def init_firebase(credentials_path=None):
    """Initialize the default Firebase app once; later calls reuse it."""
    with _init_lock:
        if not firebase_admin._apps:
            if credentials_path:
                cred = credentials.Certificate(credentials_path)
            else:
                cred = credentials.ApplicationDefault()
            firebase_admin.initialize_app(cred)
            logger.info("Firebase app initialized")
    return firebase_admin.get_app()


def get_db(credentials_path=None):
    init_firebase(credentials_path)
    return firestore.client()
