"""Judge0 (RapidAPI) execution client."""
