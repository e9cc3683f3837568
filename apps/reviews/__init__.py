"""Reviews app package: property reviews and user-to-user ratings."""
