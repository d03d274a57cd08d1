"""chessguard — chess move legality, check and checkmate detection."""
