# petfoundus/scripts/create_shelter.py
"""
보호소 계정을 생성합니다. 보호소는 회원가입 API가 없으므로 이 스크립트로만 만들 수 있습니다.

    python -m petfoundus.scripts.create_shelter "Penang Paws" shelter@example.com <password> --phone +6041234567
"""
import argparse

from petfoundus import create_app


def main(argv=None):
    parser = argparse.ArgumentParser(description="Create a shelter account.")
    parser.add_argument('name')
    parser.add_argument('email')
    parser.add_argument('password')
    parser.add_argument('--phone')
    parser.add_argument('--address')
    parser.add_argument('--city')
    parser.add_argument('--state')
    args = parser.parse_args(argv)

    location = {"address": args.address, "city": args.city, "state": args.state}
    app = create_app()
    with app.app_context():
        shelter = app.services['shelters'].create_shelter(
            args.name, args.email, args.password, phone=args.phone, location=location)
    print(f"Created shelter {shelter['name']} with id {shelter['shelter_id']}")
    return shelter


if __name__ == '__main__':
    main()
