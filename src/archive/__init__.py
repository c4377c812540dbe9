"""pnpm install and cache archive packaging."""
