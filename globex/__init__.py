"""Backend for the Globex marketing site."""
