"""
Environment configuration module
Loads environment variables for the Everclear API client and the enrichment pipeline.
"""

import os
from dotenv import load_dotenv

# Load .env file (for local development)
load_dotenv()

# Everclear ledger API
EVERCLEAR_API_BASE_URL = os.getenv('EVERCLEAR_API_BASE_URL', 'https://api.everclear.org').rstrip('/')
API_TIMEOUT = int(os.getenv('API_TIMEOUT', '30'))

# Chain / asset registry (reference data)
CHAINDATA_URL = os.getenv(
    'CHAINDATA_URL',
    'https://raw.githubusercontent.com/connext/chaindata/refs/heads/main/everclear.json',
)
CHAINDATA_TTL = int(os.getenv('CHAINDATA_TTL', '300'))  # 5 minutes default
CHAINDATA_TIMEOUT = int(os.getenv('CHAINDATA_TIMEOUT', '10'))

# Invoice enrichment
ENRICH_MAX_WORKERS = int(os.getenv('ENRICH_MAX_WORKERS', '8'))

LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO').upper()
