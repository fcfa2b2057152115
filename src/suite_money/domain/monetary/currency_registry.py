from suite_money.domain.monetary.currency import Currency


# Major currencies
USD = Currency("usd")
EUR = Currency("eur")
GBP = Currency("gbp")
JPY = Currency("jpy")
AUD = Currency("aud")
CAD = Currency("cad")
CHF = Currency("chf")

# Currencies without a distinct symbol
AZN = Currency("azn")
