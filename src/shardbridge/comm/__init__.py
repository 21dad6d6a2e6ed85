from .credentials import (
    CredentialProvider as CredentialProvider,
    NoCredentials as NoCredentials,
    BasicCredentials as BasicCredentials,
    resolve_credentials as resolve_credentials,
)
from .store_client import StoreClient as StoreClient
from .shardbridge_client import ShardBridgeClient as ShardBridgeClient
