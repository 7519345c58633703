# Scan API server
