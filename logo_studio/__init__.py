"""Logo Studio: generative logo design through a thin model relay.

Packages:
- `api`: HTTP relay adapter, relay entrypoint and interactive studio CLI.
- `core`: data contracts, validation, history and the studio controller.
- `image`: data-URI encoding, response extraction, downloads, relay client.
- `llm`: provider configuration, transport and the relay pipeline.
- `prompting`: instruction templates and provider payload assembly.
"""
