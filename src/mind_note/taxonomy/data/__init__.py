"""Packaged taxonomy data, one directory per version."""
