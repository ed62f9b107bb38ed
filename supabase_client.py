# supabase_client.py
import os
from functools import lru_cache

from dotenv import load_dotenv
from supabase import create_client, Client

load_dotenv()

DEFAULT_SCHEMA = "public"


def get_schema() -> str:
    return os.getenv("SCHEMA") or DEFAULT_SCHEMA


@lru_cache(maxsize=1)
def get_supabase_client() -> Client:
    url = os.getenv("SUPABASE_URL")
    key = os.getenv("SUPABASE_KEY")

    if not url or not key:
        raise RuntimeError("Set SUPABASE_URL and SUPABASE_KEY in .env or environment variables")

    return create_client(url, key)
