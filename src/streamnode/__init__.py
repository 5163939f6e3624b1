"""
streamnode - Runtime configuration bootstrap for a self-hosted streaming node

Prepares everything a node needs before it starts publishing:
- Persistent identity seed and stream configuration (config.json)
- MediaMTX default configuration (mediamtx.yml)
- Transcode profiles resolved against the live source stream
"""

__version__ = "0.1.0"
__package_name__ = "streamnode"
