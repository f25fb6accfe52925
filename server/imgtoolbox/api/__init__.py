"""
API package for the image toolbox.

Endpoints are organized by feature:
- generation: Text-to-image generation proxy
- recognition: Vision model proxy
- remove_bg: Background removal proxy
- compress: JPEG re-encoding
- system: Health checks
"""
