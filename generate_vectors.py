import json

from ecsign.der import ES256_PART_LENGTH, raw_to_der, der_to_raw

OUTPUT_DIR = "vectors"

# (name, part_length, R, S)
CASES = [
    ("ones_and_twos", ES256_PART_LENGTH, b"\x01" * 32, b"\x02" * 32),
    ("high_bit_r", ES256_PART_LENGTH, b"\xff" * 32, b"\x01" * 32),
    ("both_high_bits", ES256_PART_LENGTH, b"\x80" + b"\x00" * 31, b"\xff" * 32),
    ("leading_zero_stripped", ES256_PART_LENGTH, b"\x00\x7f" + b"\x01" * 30, b"\x02" * 32),
    ("leading_zero_kept", ES256_PART_LENGTH, b"\x00\x80" + b"\x01" * 30, b"\x02" * 32),
    ("zero_r", ES256_PART_LENGTH, b"\x00" * 32, b"\x01" * 32),
    # SEQUENCE content of 127 bytes, the last short form length
    ("short_form_127", 62, b"\x01" * 62, b"\x00" + b"\x01" * 61),
    # 128 bytes switches to 0x81 long form
    ("long_form_128", 62, b"\x01" * 62, b"\x01" * 62),
]

def main():
    vectors = []
    for name, part_length, r, s in CASES:
        raw = r + s
        der = raw_to_der(raw, part_length)
        if der_to_raw(der, part_length, strict=True) != raw:
            raise RuntimeError(f"{name} does not round trip")
        print(f"Generating {name} ({len(der)} byte DER)...")
        vectors.append({
            "name": name,
            "part_length": part_length,
            "raw": raw.hex(),
            "der": der.hex(),
        })

    with open(f"{OUTPUT_DIR}/der_vectors.json", "w") as f:
        json.dump({"vectors": vectors}, f, indent=2)
        f.write("\n")

if __name__ == "__main__":
    main()
