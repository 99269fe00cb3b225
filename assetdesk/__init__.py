"""AssetDesk: учёт активов компании."""
