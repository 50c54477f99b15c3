"""Hydra head client (`pyhydra.client`) and codecs (`pyhydra.proto`)."""
