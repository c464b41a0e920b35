"""Shared mainnet transactions for tests."""

import pytest


# 1fefad9e727d1e520c27372a12791c7d31ca9be933f46e92eb61da8e14ba2f6d
# Two BSV-20 transfer inscriptions in outputs 0 and 1
INSCRIPTION_TX_HASH = "1fefad9e727d1e520c27372a12791c7d31ca9be933f46e92eb61da8e14ba2f6d"
INSCRIPTION_TX_HEX = (
    "010000000288e9ce76cb52d0c845272d1688ea510d19cf59cb692a212ff2d5438f063cb441010000006b483045022100c3b7e1c067eca9741a8f74795c07743711b5f98070144b6d02d1875f7859652902202796066e482e5689101cb628bede30eb6898071d8900b459077ece2bf71e3ae2c121033ae28579dc1a189b1e7eef911ee9f18b914644b5dd9d00a4032a894ad8fb014fffffffff88e9ce76cb52d0c845272d1688ea510d19cf59cb692a212ff2d5438f063cb441030000006b483045022100c295812032c5b9778a6a093396cd29b0e427ea437c94c56834071b0a221a8d91022060acb00bad0a71b24d0879deb90ad2f894f9d43cd7021891f982f0ded85d2b85c1210288d08f20ccf5a908668160a8d0173f688f5d43fad9b7f8c33683b349c499154bffffffff0401000000000000006c0063036f726451126170706c69636174696f6e2f6273762d323000367b2270223a226273762d3230222c226f70223a227472616e73666572222c22616d74223a223235222c227469636b223a224c4f4c227d6876a914098ed6d96b6718444a39d9f27d9a3a6ab8200e9a88ac0100000000000000710063036f726451126170706c69636174696f6e2f6273762d3230003b7b2270223a226273762d3230222c226f70223a227472616e73666572222c22616d74223a2232383634333837222c227469636b223a224c4f4c227d6876a914ebccfc5b92b0345db0fcd3dba71ccd2464ce29b088acd0070000000000001976a9142bdf72063d9a16b7d642c0825577d957bd85c93b88ace0382b00000000001976a914099fde5ce081bd5c0b3b6ef84fcfcd7fae8a3f9b88ac00000000"
)

# 39b9303474b905ede8512e29939feeaf341a354391974cc4c5828befef417373
COINBASE_TX_HASH = "39b9303474b905ede8512e29939feeaf341a354391974cc4c5828befef417373"
COINBASE_TX_HEX = (
    "01000000010000000000000000000000000000000000000000000000000000000000000000ffffffff1a03eb230d2f7461616c2e636f6d2fca6a8362b6eb6dfbb91a0000ffffffff01208aa012000000001976a914522cf9e7626d9bd8729e5a1398ece40dad1b6a2f88ac00000000"
)

# f20ff38ab16c2861a059f47c97ca71b68db3651b480b50d318e58e74d723cf0a
# Zero value OP_FALSE OP_RETURN data output
DATA_TX_HEX = (
    "0100000001690b52787cfa5189d8e512c30f9f985f306aaa8b893483c070c26f43dfa12c722f0600006b4830450221009653a6fbf13f49eb99b50556bb93072bac6949ee93831d85f08d7eae0509937e02202daf5fe52f9528f11f7a8ab714b72f173da14f63ff3ce0455202ee10b3524ae5412103fd290068ae945c23a06775de8422ceb6010aaebab40b78e01a0af3f1322fa861ffffffff010000000000000000b1006a0963657274696861736822314c6d763150594d70387339594a556e374d3948565473446b64626155386b514e4a4031373366313139653866613830376632346631363564363863316134376563636534356363373062313030333137646334303337373436336330306232366463403630616635373462356631663333383861613839333466343533666364646138623932653232653038363238353132383832643638366335333434366365663800000000"
)

# 5b45f0397226f70e121eeade65a38a902696d9a474f3545e1fd264d53c26dc0c
# Seven plain P2PKH outputs
P2PKH_TX_HEX = (
    "0100000001dd99d5f4ab9c10167038834624684e0a96dfe9175953d40eaaacbbfac8af6990000000006a47304402203c4923bebb1505fe92494accb563655216f61adf6d2e7a8f41d6080e6faa75c6022010612d8ea67ccd3891e6b2ada8ba9fc23dfba117008bc0caca220b49e12a7f1f4121030d4fc707a6d8a7dfecaa68e03e60a6f450ac1f7d7b73277a5e215effa6c91982ffffffff07404b4c00000000001976a914a92755206baffbc55fa8308fad18045b0569be2488ac40420f00000000001976a914d0ec882d970786bb5467ca2dd1eddb1552d18c5288ac400d0300000000001976a914a6267d9c0a9748203eb5fb039a631e8764cab6c888ac50c30000000000001976a914bdc5251eabc2128791360543b9f5ad8ee5c5b60788ac204e0000000000001976a91467b09bc3e7ba5ebc29c35769f85d387701f17df088acd0070000000000001976a9140a340974aea1f22ce7ccfeb836c0f2b044f8355188aceef20100000000001976a914fb9202a7cb63fb8fff16a84194435978f4f3a0c288ac00000000"
)


@pytest.fixture
def inscription_tx_hex():
    return INSCRIPTION_TX_HEX


@pytest.fixture(params=[COINBASE_TX_HEX, DATA_TX_HEX, P2PKH_TX_HEX], ids=["coinbase", "data", "p2pkh"])
def plain_tx_hex(request):
    """Transactions without any one satoshi data outputs."""
    return request.param
