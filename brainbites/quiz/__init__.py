"""Quiz bank, usage tracking, sampling and the service facade."""
