"""Sample plaintexts used as hidden secrets by the scenarios."""

# Appended by the byte-at-a-time ECB oracles
ECB_SECRET = (
    b"The quick brown fox jumps over the lazy dog.\n"
    b"Pack my box with five dozen liquor jugs!\n"
)

# Session tokens for the padding oracle and the fixed-nonce CTR corpus.
# Every line is at least 32 bytes long.
SENTENCES = [
    b"Every morning the baker opens the shop at six.",
    b"A river runs quietly past the old stone mill.",
    b"She kept the letters in a box under her bed.",
    b"The train to the coast leaves from platform nine.",
    b"Bring a warm coat, the evenings are getting cold.",
    b"He painted the fence blue and the gate bright red.",
    b"Our neighbours grow tomatoes along the south wall.",
    b"The meeting was moved to Thursday at half past two.",
    b"Nobody remembered where the spare key was hidden.",
    b"The library closes early on public holidays.",
    b"We walked along the beach until the sun went down.",
    b"Please leave your shoes by the door when you come in.",
    b"The cat slept on the warm windowsill all afternoon.",
    b"Fresh bread tastes best with butter and a little salt.",
    b"They built a small cabin at the edge of the forest.",
    b"The old clock in the hall still chimes every hour.",
    b"In winter the lake freezes and children skate on it.",
    b"He forgot his umbrella and arrived soaked to the skin.",
    b"The museum has a new exhibit about ancient maps.",
    b"Turn left at the bakery and walk for two minutes.",
    b"My grandmother taught me how to make apple pie.",
    b"The storm knocked out the power for the whole night.",
    b"A good book and a cup of tea make a perfect evening.",
    b"The garden was full of bees buzzing around the roses.",
    b"We missed the last bus and had to walk all the way home.",
    b"The coach wrote the scores on the board in chalk.",
    b"Someone left a bicycle leaning against the fountain.",
    b"The market sells cheese, honey, eggs and fresh herbs.",
    b"Her brother plays the violin in the city orchestra.",
    b"The lighthouse keeper lit the lamp every evening.",
    b"On Sundays the whole family gathers for a long lunch.",
    b"The path up the hill is steep but the view is worth it.",
    b"I found an old photograph tucked inside the book.",
    b"The kettle whistled loudly in the empty kitchen.",
    b"Snow covered the rooftops by the time we woke up.",
    b"The fisherman mended his nets on the harbour wall.",
    b"A small dog barked at every car that drove past.",
    b"The children built a tall tower out of wooden blocks.",
    b"We planted an oak tree in the park twenty years ago.",
    b"The postman waved as he cycled down the narrow lane.",
]
