# ingest service - authenticated write API and last-point read API for time series
