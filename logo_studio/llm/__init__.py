"""Provider layer: configuration, Gemini transport and the relay pipeline."""
