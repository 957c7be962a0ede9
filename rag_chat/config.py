import os
from dotenv import load_dotenv

load_dotenv()

# Basic settings
DATA_DIR = os.path.abspath(os.getenv("DATA_DIR", "data"))
LOGS_DIR = os.path.join(DATA_DIR, "logs")
# Single JSON file backing the key-value store (documents + chat settings)
STORE_PATH = os.getenv("STORE_PATH", os.path.join(DATA_DIR, "store.json"))

# Chunking (size in characters, overlap in words)
CHUNK_SIZE = int(os.getenv("CHUNK_SIZE", "500"))
CHUNK_OVERLAP = int(os.getenv("CHUNK_OVERLAP", "50"))

# Relevance ranking
RELEVANCE_THRESHOLD = float(os.getenv("RELEVANCE_THRESHOLD", "0.1"))
APPLY_RELEVANCE_THRESHOLD = os.getenv("APPLY_RELEVANCE_THRESHOLD", "true").lower() == "true"
DEFAULT_MAX_CHUNKS = int(os.getenv("DEFAULT_MAX_CHUNKS", "2"))
REQUIRE_CONTEXT = os.getenv("REQUIRE_CONTEXT", "false").lower() == "true"

# Uploads
MAX_UPLOAD_BYTES = int(os.getenv("MAX_UPLOAD_BYTES", str(5 * 1024 * 1024)))

# Chat backends
DEFAULT_PROVIDER = os.getenv("DEFAULT_PROVIDER", "local")
SYSTEM_PROMPT = os.getenv("SYSTEM_PROMPT", "You are a helpful AI assistant.")

OPENAI_API_KEY = os.getenv("OPENAI_API_KEY", "")
OPENAI_MODEL = os.getenv("OPENAI_MODEL", "gpt-3.5-turbo")
OPENAI_MAX_TOKENS = int(os.getenv("OPENAI_MAX_TOKENS", "1000"))
OPENAI_TEMPERATURE = float(os.getenv("OPENAI_TEMPERATURE", "0.7"))

OLLAMA_BASE_URL = os.getenv("OLLAMA_BASE_URL", "http://localhost:11434")
OLLAMA_MODEL = os.getenv("OLLAMA_MODEL", "llama2")

OPENROUTER_BASE_URL = os.getenv("OPENROUTER_BASE_URL", "https://openrouter.ai/api/v1")
OPENROUTER_API_KEY = os.getenv("OPENROUTER_API_KEY", "")
OPENROUTER_MODEL = os.getenv("OPENROUTER_MODEL", "meta-llama/llama-3.2-3b-instruct:free")
OPENROUTER_MAX_TOKENS = int(os.getenv("OPENROUTER_MAX_TOKENS", "500"))
OPENROUTER_TEMPERATURE = float(os.getenv("OPENROUTER_TEMPERATURE", "0.7"))

# Seconds; local models can be slow on first load
LLM_REQUEST_TIMEOUT = float(os.getenv("LLM_REQUEST_TIMEOUT", "120"))

# API Configuration
API_HOST = os.getenv("API_HOST", "127.0.0.1")
API_PORT = int(os.getenv("API_PORT", "8000"))
FRONTEND_VITE_PORT = int(os.getenv("FRONTEND_VITE_PORT", "5173"))
FRONTEND_REACT_PORT = int(os.getenv("FRONTEND_REACT_PORT", "3000"))

os.makedirs(DATA_DIR, exist_ok=True)
os.makedirs(LOGS_DIR, exist_ok=True)
