import os
import threading

def parse_email_list(value: str | None) -> list[str]:
    if not value:
        return []
    return [e.strip().lower() for e in value.split(",") if e.strip()]

class BackendSettings:
    _instance = None
    _lock = threading.Lock()

    def __init__(self):
        self.DEBUG_MODE = os.environ.get("DEBUG_MODE","development")
        # Role seeding for first sign-in
        self.SUPER_ADMIN_EMAILS = parse_email_list(os.environ.get("SUPER_ADMIN_EMAILS"))
        self.ADMIN_EMAILS = parse_email_list(os.environ.get("ADMIN_EMAILS"))
        # Outbound email (EmailJS REST API)
        self.EMAILJS_API_URL = os.environ.get("EMAILJS_API_URL", "https://api.emailjs.com/api/v1.0/email/send")
        self.EMAILJS_SERVICE_ID = os.environ.get("EMAILJS_SERVICE_ID", None)
        self.EMAILJS_TEMPLATE_ID = os.environ.get("EMAILJS_TEMPLATE_ID", None)
        self.EMAILJS_PUBLIC_KEY = os.environ.get("EMAILJS_PUBLIC_KEY", None)
        self.EMAILJS_PRIVATE_KEY = os.environ.get("EMAILJS_PRIVATE_KEY", None)
        self.RECENT_SUGGESTIONS_LIMIT = int(os.environ.get("RECENT_SUGGESTIONS_LIMIT", "100"))

    def __new__(cls):
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = super(BackendSettings, cls).__new__(cls)
        return cls._instance

settings = BackendSettings()
