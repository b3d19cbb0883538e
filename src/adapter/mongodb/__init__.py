ACCOUNTS_COLLECTION_NAME = 'accounts'
CLIENTS_COLLECTION_NAME = 'clients'
