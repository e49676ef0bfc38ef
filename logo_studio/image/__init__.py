"""Image handling package.

Scope:
    Data-URI encoding of reference images, extraction of generated images from
    provider responses, saving results to disk, and the studio-side HTTP client
    for the relay.

Non-goals:
    - No image editing or rasterization of vector output.
"""
