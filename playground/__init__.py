"""Command-line front end for the rendezvous scenarios."""
